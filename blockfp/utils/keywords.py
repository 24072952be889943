# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Keywords for JSON/YAML files and dictionary keys
"""


class KW:
    """Class to store the keywords used in JSON/YAML files"""

    OUTLINE = "Outline"  # Fixed outline of the floorplan
    BLOCKS = "Blocks"  # Blocks to be placed
    NETS = "Nets"  # Nets connecting blocks and terminals
    TERMINALS = "Terminals"  # Named fixed terminals (pins)
    REGIONS = "Regions"  # Keep-out rectangles for macros
    LOCATIONS = "Locations"  # Guidance rectangles for blocks
    FEASIBLE = "Feasible"  # Does the floorplan fit in the outline?
    COST = "Cost"  # Cost breakdown of the floorplan

    AREA = "area"  # Area of a block
    ASPECT_RATIO = "aspect_ratio"  # List of [min, max] height/width ratios
    MACROS = "macros"  # Number of macros of a hard block
    SHAPES = "shapes"  # List of [width, height] options of a hard block
    WIDTH = "width"  # Width (of a block or outline)
    HEIGHT = "height"  # Height (of a block or outline)
    X = "x"  # Lower-left x coordinate
    Y = "y"  # Lower-left y coordinate

    # Keys of the cost breakdown
    WIRELENGTH = "wirelength"
    OUTLINE_PENALTY = "outline"
    BOUNDARY = "boundary"
    MACRO_BLOCKAGE = "macro_blockage"
    LOCATION = "location"
    NOTCH = "notch"
    NORMALIZED = "normalized"
