__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy re-exports of the pipeline entry points."""
    _command_names = {
        "CommandPipeline",
        "FeedbackChannel",
        "IntentResolver",
        "MutationExecutor",
        "OptimisticMutation",
        "ScreenTable",
        "bind",
        "dispatch",
    }
    if name in _command_names:
        from voicebook import commands

        return getattr(commands, name)
    if name == "ScrollAnimator":
        from voicebook.scroll import ScrollAnimator

        return ScrollAnimator
    raise AttributeError(f"module 'voicebook' has no attribute {name!r}")
