"""Claude Skills — skill documents and slash commands for Claude.

Installs markdown skill documents, slash-command templates and git hook
templates from a bundle directory into the Claude home directory.
"""

__version__ = "0.1.0"

CLAUDE_HOME = "~/.claude"
