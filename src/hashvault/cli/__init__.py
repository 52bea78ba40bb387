"""HashVault command-line interface (typer)."""
