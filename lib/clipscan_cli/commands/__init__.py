"""Command modules for the clipscan CLI. Importing a module registers its command."""
