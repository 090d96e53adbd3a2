from langchain_core.prompts import PromptTemplate


ANALYSIS_PROMPT = PromptTemplate.from_template(
    """You are a fact-checking expert. Analyze this news article for authenticity.

Title: {title}
Content: {content}

Analyze for:
1. Factual accuracy
2. Source credibility
3. Language patterns
4. Logical consistency
5. Emotional manipulation
6. Citation verification

Return EXACTLY this JSON format (no other text):
{{
    "isFake": false,
    "confidence": 85,
    "features": ["finding 1", "finding 2"],
    "explanation": "detailed explanation"
}}

Guidelines:
- isFake must be true/false based on clear evidence
- confidence must be 0-100 based on evidence strength
- features must list specific findings
- explanation must provide clear reasoning"""
)


def build_analysis_prompt(title: str, content: str) -> str:
    """Fill the fact-check prompt with one article."""
    return ANALYSIS_PROMPT.format(title=title, content=content)
