# ABOUTME: Subcommand modules for the hardshelf CLI.
# ABOUTME: Each module defines one command or command group.
