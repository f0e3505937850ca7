"""
Enumerations for menu models.

- FoodType: Dietary classification shown as the veg/non-veg badge
"""

from enum import Enum


class FoodType(str, Enum):
    """
    Dietary classification of a menu item.

    Values:
        VEG: Vegetarian
        NON_VEG: Contains meat, fish or egg
    """

    VEG = "veg"
    NON_VEG = "non-veg"
