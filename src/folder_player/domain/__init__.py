"""Domain layer: file browsing and playback."""
