"""Prompt templates per flow.

Placeholders:
    {{field}}        the input field's text (empty if unset)
    {{media field}}  the image(s) held in a data URI field; list-valued
                     fields inline every image in order
"""

from __future__ import annotations

_VEGETATION_TEMPLATE = """You are an expert in vegetation analysis. Analyze the provided image and location to determine the vegetation type, density, and overall health.

Location: {{location}}
Image: {{media photo_data_uri}}

Provide the vegetation type, vegetation density (sparse, medium, or dense), and an overall health assessment of the vegetation. Include a confidence score between 0 and 1 and a short reasoning that mentions anything in the image that limits the assessment."""

_SOIL_TEMPLATE = """You are an expert soil scientist working from aerial and ground-level imagery. Classify the soil visible in the provided image, using the location context to inform likely soil types for the region.

Location Context: {{location_context}}
Image: {{media photo_data_uri}}

Determine the soil type, the apparent moisture level, whether any surface water (ponds, streams, puddles, flooding) is visible, and the erosion risk. Include a confidence score between 0 and 1 and explain your reasoning, noting when vegetation cover or image quality hides the soil surface."""

_INFRASTRUCTURE_TEMPLATE = """You are an expert in analyzing aerial and satellite imagery to detect infrastructure.

Analyze the provided images and geospatial context to identify all infrastructure present, classifying each by type (road, building, power line, railway, etc.). For each identified piece of infrastructure, provide a description of its location within the images and in relation to the geospatial context. If possible, comment on the proximity to other geographical features.

Images: {{media photo_data_uri}}

Geospatial Context: {{geospatial_context}}

Thought:
1. Analyze each image to identify potential infrastructure elements.
2. Use geospatial context to help identify and classify infrastructure based on location and known patterns.
3. Determine the type of each detected infrastructure.
4. Describe the location of each infrastructure element within the images and relative to the geospatial context.
5. Assess the proximity of infrastructure to geographical features based on the images and geospatial context.
6. Compile the findings into the specified output format.
7. Determine an overall confidence score for the detection and explain the reasoning, including any ambiguities or limitations in the data.

Example Input:
Images: [Image of a road, Image of a building complex]
Geospatial Context: {"type":"FeatureCollection","features":[{"type":"Feature","properties":{},"geometry":{"type":"LineString","coordinates":[[-74,40],[-73,41]]}}]}

Example Output:
Thought:
1. The first image clearly shows a paved road. The second image shows multiple connected structures, likely a building complex.
2. The geospatial context shows a line string, which could represent a road or other linear feature, aligning with the first image.
3. Identified infrastructure types are road and building.
4. The road appears to be a major road running through a developed area. The building complex is located adjacent to the road.
5. Based on the images and geospatial context, the road appears to be near a forested area in one section.
6. Outputting the details in the specified JSON format.
{
  "infrastructureDetails": [
    {"type": "road", "locationDescription": "A paved road running through the area, visible in the first image and potentially represented by the line string in the geospatial context.", "proximityToGeoFeatures": "Appears to be near a forested area in some parts."},
    {"type": "building complex", "locationDescription": "A group of connected buildings located adjacent to the road, visible in the second image.", "proximityToGeoFeatures": "Not directly adjacent to major geographical features based on the provided images and context."}
  ],
  "confidence": 0.95,
  "reasoning": "Infrastructure types (road, building complex) were clearly identifiable in the high-resolution images. The geospatial context provided some supporting information for the road location. There were no significant ambiguities in the visual data or conflicts with the context."
}"""

_PROXIMITY_TEMPLATE = """You are an expert in geospatial risk analysis. Reason about how the detected infrastructure relates to the surrounding geographical features.

Infrastructure: {{infrastructure}}

Geographical Features: {{geographical_features}}

Thought:
1. Identify which infrastructure elements sit closest to water, unstable soil, or steep terrain.
2. Consider how soil type and surface water affect foundations, drainage, and access.
3. List concrete risk factors, most severe first.
4. Recommend mitigations or further surveys where the data is insufficient.

Provide a proximity assessment, the list of risk factors, recommendations, a confidence score between 0 and 1, and your reasoning."""

_OUTPUT_INSTRUCTIONS = """

OUTPUT FORMAT:
Respond with ONLY a JSON object that conforms to this JSON schema. No markdown fences, no text outside the JSON.
{schema}"""

_TEMPLATES = {
    "vegetation": _VEGETATION_TEMPLATE,
    "soil": _SOIL_TEMPLATE,
    "infrastructure": _INFRASTRUCTURE_TEMPLATE,
    "proximity": _PROXIMITY_TEMPLATE,
}


def get_prompt_template(flow: str) -> str:
    try:
        return _TEMPLATES[flow]
    except KeyError:
        raise KeyError(f"No prompt template for flow: {flow}") from None


def get_all_templates() -> dict[str, str]:
    """Return all prompt templates keyed by flow name."""
    return dict(_TEMPLATES)


def output_instructions(schema_json: str) -> str:
    return _OUTPUT_INSTRUCTIONS.format(schema=schema_json)
