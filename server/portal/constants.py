"""Record store collection names used across portal operations."""


class Collections:
    PERSONNEL = "personnel"
    MEDICAL_LEAVES = "medical-leaves"
    VEHICLES = "vehicles"
    ASSETS = "assets"


# Category label for records with a missing/empty value in an aggregated field
NOT_INFORMED = "Não informado"
