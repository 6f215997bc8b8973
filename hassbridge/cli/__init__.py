"""CLI module for hassbridge."""
