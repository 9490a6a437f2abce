"""linkcheck CLI subcommands."""
