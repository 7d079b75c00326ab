from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "DCSIM_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Kirchhoff checks
    kcl_tolerance_a: float = 0.001
    kvl_tolerance_v: float = 0.01

    # Safety
    short_circuit_limit_a: float = 10.0

    # Solver
    pivot_tolerance: float = 1e-8
    # Give unwired parts of the canvas their own 0 V reference instead of
    # letting them make the whole system singular
    reference_floating_islands: bool = True

    # Display
    bulb_full_brightness_w: float = 10.0
    frame_time_s: float = 0.016  # 60 FPS tick

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
