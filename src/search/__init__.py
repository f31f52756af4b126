"""Remote repository search client."""
