from typing import List
from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel
from google.genai import types


class _WireModel(BaseModel):
    # The model replies in camelCase (possibleDiseases, diseaseName, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DiseaseInfo(_WireModel):
    disease_name: StrictStr = Field(description="The common name of the plant disease.")
    description: StrictStr = Field(
        description="A brief, easy-to-understand description of the disease and its typical symptoms."
    )
    remedies: List[StrictStr] = Field(description="A list of actionable steps or treatments to remedy the disease.")
    prevention: List[StrictStr] = Field(
        description="A list of tips to prevent this disease from occurring in the future."
    )


class DiagnosisReport(_WireModel):
    possible_diseases: List[DiseaseInfo] = Field(
        description="A list of potential diseases matching the symptoms. Provide 1 to 3 possibilities."
    )
    summary: StrictStr = Field(
        description="A brief, encouraging summary of the diagnosis and next steps for the user."
    )


def _string(description: str) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description)


def _string_list(description: str) -> types.Schema:
    return types.Schema(
        type=types.Type.ARRAY,
        description=description,
        items=types.Schema(type=types.Type.STRING),
    )


def _describe(model, field: str) -> str:
    return model.model_fields[field].description


# Response contract sent with every request. Kept in step with the models above.
DIAGNOSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "possibleDiseases": types.Schema(
            type=types.Type.ARRAY,
            description=_describe(DiagnosisReport, "possible_diseases"),
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "diseaseName": _string(_describe(DiseaseInfo, "disease_name")),
                    "description": _string(_describe(DiseaseInfo, "description")),
                    "remedies": _string_list(_describe(DiseaseInfo, "remedies")),
                    "prevention": _string_list(_describe(DiseaseInfo, "prevention")),
                },
                required=["diseaseName", "description", "remedies", "prevention"],
            ),
        ),
        "summary": _string(_describe(DiagnosisReport, "summary")),
    },
    required=["possibleDiseases", "summary"],
)
