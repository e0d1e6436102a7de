"""JSON schemas bundled with plotgallery."""
