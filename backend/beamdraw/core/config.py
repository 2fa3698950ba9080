from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "BeamDraw Detailing Engine"
    environment: str = "development"

    # Valores por defecto de un desarrollo nuevo o incompleto
    DEFAULT_UNIT_SCALE: float = 2.0
    DEFAULT_X0_M: float = 0.0
    DEFAULT_Y0_M: float = 0.0
    DEFAULT_COVER_M: float = 0.04
    DEFAULT_BASTON_LC_M: float = 0.50
    DEFAULT_HOOK_LEG_M: float = 0.15
    DEFAULT_BAR_DIAMETER: str = "3/4"
    DEFAULT_STIRRUP_DIAMETER: str = "3/8"

    # Materiales usados para los límites de cuantía (kgf/cm²)
    QUANTITY_FC_KGF_CM2: float = 210.0
    QUANTITY_FY_KGF_CM2: float = 4200.0

    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    @field_validator("DEFAULT_UNIT_SCALE")
    @classmethod
    def positive_scale(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("DEFAULT_UNIT_SCALE debe ser mayor que cero")
        return value

    class Config:
        env_file = ".env"
        env_prefix = "BEAMDRAW_"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
