"""
Centralized AI Prompt Repository
- Keeps the model contract in one place
- Decouples prompts from pipeline logic
"""

# --- OCR PROMPTS ---
OCR_INSTRUCTION = "Extract all text from this document."

# --- CV ANALYSIS PROMPTS ---
CV_ANALYSIS_SYSTEM = (
    "You are an expert HR specialist. Your task is to analyze the provided CV text "
    "against the required job skills and qualifications. "
    "Respond with ONLY a JSON object. Do not include any text outside of the JSON object itself."
)

CV_ANALYSIS_USER_TEMPLATE = """Job Requirements (Keywords): "{keywords}"

CV Text:
---
{cv_text}
---

Based on the CV text and the job requirements, provide a JSON object with the following structure. Do not include any text outside of the JSON object itself.

JSON Structure:
{{
  "ATS": "Calculate a percentage match score based on how well the CV meets the specified Job Requirements. The score should be a string like '85%'.",
  "Name": "Extract the full name",
  "Phone": "Extract the phone number",
  "Mail": "Extract the email",
  "Edu": ["List educational degrees as an array of strings"],
  "SKILLS": [["Skill Category 1", "Details as a string"], ["Skill Category 2", "Details as a string"]],
  "EXPERIENCE": ["List key experiences or job titles as an array of strings"]
}}"""

# helper to build prompts
def get_prompt(template: str, **kwargs) -> str:
    return template.format(**kwargs)
