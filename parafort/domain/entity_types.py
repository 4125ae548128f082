"""Business entity types offered for formation."""

LLC = "LLC"
CORPORATION = "Corporation"
PROFESSIONAL_CORPORATION = "Professional Corporation"
NON_PROFIT_CORPORATION = "Non-Profit Corporation"

ENTITY_TYPES = (LLC, CORPORATION, PROFESSIONAL_CORPORATION, NON_PROFIT_CORPORATION)
