"""Terminal rendering for voicebook screens.

All render functions are pure: they read a screen and return Rich
renderables. No side effects, no mutation.
"""

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from voicebook.core.types import ScrollState
from voicebook.models import FriendshipStatus, Post
from voicebook.screens import (
    CommandScreen,
    FeedScreen,
    FriendsScreen,
    FriendsTab,
    ProfileScreen,
    ViewScreen,
)

_TAB_LABELS: dict[FriendsTab, str] = {
    FriendsTab.REQUESTS: "Requests",
    FriendsTab.SUGGESTIONS: "Suggestions",
    FriendsTab.ALL_FRIENDS: "All friends",
}

_STATUS_LABELS: dict[FriendshipStatus, str] = {
    FriendshipStatus.NOT_FRIENDS: "",
    FriendshipStatus.REQUEST_SENT: "Request sent",
    FriendshipStatus.PENDING_APPROVAL: "Wants to be friends",
    FriendshipStatus.FRIENDS: "Friends",
}


def short_model_name(name: str | None) -> str:
    """Extract the last path segment for display."""
    if not name:
        return "--"
    return name.split("/")[-1]


def humanize(view: str) -> str:
    return view.replace("_", " ").title()


def _tab_counts(screen: FriendsScreen) -> dict[FriendsTab, int]:
    return {
        FriendsTab.REQUESTS: len(screen.visible_requests()),
        FriendsTab.SUGGESTIONS: len(screen.suggestions),
        FriendsTab.ALL_FRIENDS: len(screen.friends),
    }


def render_friends(screen: FriendsScreen) -> Panel:
    """Render the friends screen: tab strip plus the active tab's people."""
    tabs = Text()
    for tab, count in _tab_counts(screen).items():
        style = "bold reverse" if tab is screen.active_tab else "dim"
        tabs.append(f" {_TAB_LABELS[tab]} ({count}) ", style=style)
        tabs.append(" ")

    if screen.loading:
        return Panel(Group(tabs, Text("Loading...", style="dim")), title="Friends")

    users = screen.visible_users()
    if not users:
        return Panel(Group(tabs, Text("Nobody here yet.", style="dim")), title="Friends")

    table = Table(expand=True, show_edge=False)
    table.add_column("Name", style="bold")
    table.add_column("Username", style="cyan")
    table.add_column("Status", style="green")
    for user in users:
        if screen.active_tab is FriendsTab.REQUESTS:
            status = _STATUS_LABELS[FriendshipStatus.PENDING_APPROVAL]
        elif screen.active_tab is FriendsTab.SUGGESTIONS:
            status = _STATUS_LABELS[user.friendship_status]
        else:
            status = _STATUS_LABELS[FriendshipStatus.FRIENDS]
        table.add_row(user.name, f"@{user.username}", status)
    return Panel(Group(tabs, table), title="Friends")


def render_profile(screen: ProfileScreen) -> Panel:
    user = screen.profile_user
    if user is None:
        return Panel(Text(f"Loading @{screen.username}...", style="dim"), title="Profile")

    body = Text()
    body.append(user.name, style="bold")
    body.append(f"  @{user.username}\n", style="cyan")
    body.append(f"{len(user.friend_ids)} friends\n")
    if screen.is_own_profile:
        body.append("This is you.", style="dim")
    else:
        label = _STATUS_LABELS[screen.friendship_status] or "Not friends"
        body.append(label, style="green")
    return Panel(body, title="Profile")


def render_post(post: Post, user_id: str) -> RenderableType:
    header = Text()
    header.append(post.author.name, style="bold")
    header.append(f"  @{post.author.username}\n", style="cyan")
    header.append(post.caption)

    parts: list[RenderableType] = [header]
    if post.reactions:
        counts: dict[str, int] = {}
        for emoji in post.reactions.values():
            counts[emoji] = counts.get(emoji, 0) + 1
        reactions = Text("  ".join(f"{e} {n}" for e, n in counts.items()))
        if user_id in post.reactions:
            reactions.append("  (you reacted)", style="dim")
        parts.append(reactions)

    if post.poll is not None:
        voted = post.poll.voted_index(user_id)
        poll = Table(title=post.poll.question, expand=True, show_edge=False)
        poll.add_column("Option")
        poll.add_column("Votes", justify="right")
        for i, option in enumerate(post.poll.options):
            marker = " \N{CHECK MARK}" if i == voted else ""
            poll.add_row(option.text + marker, str(option.votes))
        parts.append(poll)
    return Group(*parts)


def render_feed(screen: FeedScreen) -> Panel:
    post = screen.active_post
    if post is None:
        return Panel(Text("There are no posts to show.", style="dim"), title="Feed")
    title = f"Feed {screen.active_index + 1}/{len(screen.posts)}"
    return Panel(render_post(post, screen.current_user.id), title=title)


def render_view(screen: ViewScreen) -> Panel:
    body = Text("Nothing to show here yet. Say \"go back\" to return.", style="dim")
    return Panel(body, title=humanize(screen.name))


def render_screen(screen: CommandScreen) -> RenderableType:
    """Render whichever screen is on top of the stack."""
    if isinstance(screen, FriendsScreen):
        return render_friends(screen)
    if isinstance(screen, ProfileScreen):
        return render_profile(screen)
    if isinstance(screen, FeedScreen):
        return render_feed(screen)
    if isinstance(screen, ViewScreen):
        return render_view(screen)
    return Panel(Text(screen.name), title="Screen")


def render_status(
    screen_name: str,
    model: str,
    busy: bool = False,
    scroll: ScrollState = ScrollState.IDLE,
) -> Text:
    """Render the one-line status bar."""
    status = Text()
    status.append("Screen: ", style="bold")
    status.append(humanize(screen_name))
    status.append(" | ")
    status.append("Working..." if busy else "Ready", style="yellow" if busy else "green")
    status.append(" | ")
    status.append(f"NLU: {short_model_name(model)}")
    if scroll is not ScrollState.IDLE:
        status.append(" | ")
        status.append(f"Scrolling {scroll}", style="cyan")
    return status


def render_caption(message: str | None) -> Text:
    if not message:
        return Text("")
    return Text(f"\N{SPEAKER WITH THREE SOUND WAVES} {message}", style="italic")
