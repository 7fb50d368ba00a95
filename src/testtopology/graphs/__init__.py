"""Graph helpers: function-name lookup, call resolution, and NetworkX views."""
