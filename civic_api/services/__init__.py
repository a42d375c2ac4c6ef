"""Domain services shared by routes and socket events."""
