"""Analytics built over extracted tests and the call graph."""
