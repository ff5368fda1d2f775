"""
Pydantic schemas for request/response validation.
"""

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    model_loaded: bool
    artifact: Optional[str] = None
    version: str = "1.0.0"


class PredictionResponse(BaseModel):
    label: str            # "cat", "dog" or "neither"
    confidence: int       # Percentage for the reported label (0 - 100)
    dog_percentage: int   # Rounded dog probability (0 - 100)
    message: str          # Display text, e.g. "The image is a dog (87%)"
