# tubely/config/auth.py
from dataclasses import dataclass
from .base import BaseConfig


@dataclass
class AuthConfig(BaseConfig):
    """Bearer JWT validation settings"""
    jwt_secret: str = ""
    jwt_issuer: str = "tubely-access"
    jwt_algorithm: str = "HS256"
    leeway_seconds: int = 0

    @classmethod
    def from_env(cls) -> 'AuthConfig':
        return cls(
            jwt_secret=cls.get_env_str('JWT_SECRET', ""),
            jwt_issuer=cls.get_env_str('JWT_ISSUER', "tubely-access"),
            jwt_algorithm=cls.get_env_str('JWT_ALGORITHM', "HS256"),
            leeway_seconds=cls.get_env_int('JWT_LEEWAY_SECONDS', 0),
        )
