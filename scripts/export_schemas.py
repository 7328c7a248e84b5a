"""Export JSON schemas for the submission payloads and the API models."""

import json
from pathlib import Path

from pydantic import BaseModel

from backend.tripdesk.models import BookingPayload, FormSchema, ItineraryPayload, Submission

EXPORTED_MODELS: dict[str, type[BaseModel]] = {
    "ItineraryPayload": ItineraryPayload,
    "BookingPayload": BookingPayload,
    "Submission": Submission,
    "FormSchema": FormSchema,
}


def main(schemas_dir: Path = Path("docs/schemas")) -> list[Path]:
    """Export schemas to docs/schemas/."""
    schemas_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, model in EXPORTED_MODELS.items():
        path = schemas_dir / f"{name}.schema.json"
        with open(path, "w") as f:
            json.dump(model.model_json_schema(by_alias=True, mode="serialization"), f, indent=2)
        print(f"Exported {name} schema to {path}")
        written.append(path)
    return written


if __name__ == "__main__":
    main()
