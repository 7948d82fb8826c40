"""Settings, configuration loading and privilege handling for the dotfiles setup."""
