"""Application entry points: config, CLI, console REPL and Textual TUI."""
