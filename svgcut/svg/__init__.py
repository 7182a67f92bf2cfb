"""SVG document access: parsing, attribute grammars, shapes and traversal."""
