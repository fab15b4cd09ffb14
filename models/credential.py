"""Credential data model for the GitHub image store"""

from dataclasses import dataclass


@dataclass
class Credential:
    """Static credential used for every GitHub contents request"""
    token: str
    owner: str
    repo: str

    def is_complete(self) -> bool:
        return bool(self.token and self.owner and self.repo)

    def masked_token(self) -> str:
        if not self.token:
            return ""
        if len(self.token) <= 8:
            return "*" * len(self.token)
        return f"{self.token[:4]}{'*' * (len(self.token) - 8)}{self.token[-4:]}"
