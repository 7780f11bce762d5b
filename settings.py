# settings.py

# Debug preview
TILE_SIZE = 16
PREVIEW_TITLE = "Village Preview"

# Colors
COLOR_BG = (15, 15, 20)
COLOR_MARKER_OUTLINE = (255, 255, 255)
