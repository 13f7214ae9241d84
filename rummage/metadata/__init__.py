"""Field providers for git, system and process metadata."""
