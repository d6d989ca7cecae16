"""The pclock command-line interface."""
