"""Lock-guarded Pretalx schedule sync for deconf."""
