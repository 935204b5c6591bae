# Densest to sparsest, indexed by ascending luminance
GLYPH_RAMP = "@%#*+=-:. "
