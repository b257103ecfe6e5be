"""Fan arguments out across a grid of tmux panes."""

__version__ = "0.1.0"
