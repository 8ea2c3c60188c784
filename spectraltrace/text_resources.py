"""Short labels and tooltips for the scene parameters."""

IMAGE_WIDTH_TOOLTIP = "The width of the image in pixels."
IMAGE_HEIGHT_TOOLTIP = "The height of the image in pixels."
CAMERA_POSITION_TOOLTIP = "The position of the camera in the scene."
LIGHT_SOURCE_TOOLTIP = "The position of the light source in the scene."
OBJECT_SPHERE_RADIUS_TOOLTIP = "The radius of the sphere."
OBJECT_PLAIN_BOX_DIMENSIONS_TOOLTIP = "The width, height and depth of an axis-aligned box."
OBJECT_TYPE_SPHERE_TOOLTIP = "A perfect sphere. Only its position and radius can be adjusted."
EDIT_BUTTON_PENCIL_EMOJI = "\u270f"
EDIT_BUTTON_TOOLTIP = "Change the name of this element."