"""journal-cli - git-backed daily journal."""
