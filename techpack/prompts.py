TECH_PACK_TEMPLATE = (
    "## Brand\n"
    "{{Brand Name}}\n\n"
    "## Designer\n"
    "{{Designer Name}}\n\n"
    "## Description\n"
    "{{Brief description of the garment type, e.g., WOMENSWEAR, MENSWEAR}}\n\n"
    "## Season\n"
    "{{Season information, e.g., SS24, FW23}}\n\n"
    "## Style Name\n"
    "{{Style name of the garment}}\n\n"
    "## Style Number\n"
    "{{Style number/code}}\n\n"
    "## Main Fabric\n"
    "{{Main fabric description}}\n\n"
    "## Garment Color\n"
    "{{Overall color of the garment}}\n\n"
    "## Size Range\n"
    "{{Available sizes with sample size in brackets, e.g., XS S [M] L XL}}\n\n"
    "## Measurements\n"
    "{{Key measurements in a structured format}}\n\n"
    "## Bill of Materials\n"
    "{{BOM Item 1}}\n\n"
    "{{BOM Item 2}}\n\n"
    "{{BOM Item 3}}\n\n"
)

SYSTEM_PROMPT = (
    "Analyze this clothing item and create a structured tech pack with the following format:"
    + TECH_PACK_TEMPLATE
    + "Markdown is supported. Focus on accuracy and professional presentation. "
    "Use {{Field Name}} for fields that need to be filled in by the user."
)

USER_PROMPT = (
    "Please analyze this clothing item and create a detailed tech pack following the "
    "structured format. Use {{Field Name}} for fields that need to be filled in by the user. "
    "DO not add any title or extra categories besides the template"
)

MISSING_IMAGE_ERROR = (
    "No image attachment found. Please upload an image first and then run this tool in "
    "the same message."
)

HANDOFF_MESSAGE = (
    "I've created a tech pack based on your image. I've identified several fields that need "
    "your input. Please look at the form below the chat to fill in these details one by one. "
    "As you provide information, I'll update the tech pack document with your input."
)

COMPLETION_MESSAGE = (
    "I've completed filling in all the required fields. Please review the tech pack and let "
    "me know if you have any suggestions for improvements."
)

FINAL_POLISH_MESSAGE = (
    "Please add final polish and check for grammar, add section titles for better structure, "
    "and ensure everything reads smoothly."
)

REQUEST_SUGGESTIONS_MESSAGE = "Please add suggestions you have that could improve the writing."

NEXT_FIELD_TAIL = "Let's continue with the next field."
LAST_FIELD_TAIL = "That was the last field! I'll review the tech pack now."


def make_image_preamble(title: str, image_name: str | None, image_url: str) -> str:
    return f"# {title}\n\n![{image_name or 'Uploaded Image'}]({image_url})\n\n"


def make_user_prompt(image_url: str) -> list[dict]:
    return [
        {"type": "text", "text": USER_PROMPT},
        {"type": "image_url", "image_url": {"url": image_url}},
    ]
