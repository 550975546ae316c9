ARTICLE_PROMPT_TEMPLATE = """You are a financial news analyst. Analyze the following article and determine its sentiment.
Consider factors like:
- Positive indicators: growth, earnings beats, innovation, partnerships, raised guidance
- Negative indicators: losses, layoffs, lawsuits, lowered guidance, regulatory issues

Return ONLY a valid JSON object with:
- "score": a number between -1 and 1 (-1 very negative, 0 neutral, 1 very positive)
- "summary": one or two sentences explaining why this sentiment was assigned

Article:
Headline: {headline}
Summary: {summary}

Sentiment analysis (JSON only):"""

TEXT_PROMPT_TEMPLATE = """Analyze the following text and determine its sentiment.
Return a JSON object with:
- "score": a number between -1 and 1 (negative to positive)
- "summary": a brief explanation of why this sentiment was assigned

Text: {text}

Sentiment analysis:"""


def build_article_prompt(headline: str, summary: str) -> str:
    return ARTICLE_PROMPT_TEMPLATE.format(headline=headline.strip(), summary=summary.strip())


def build_text_prompt(text: str) -> str:
    return TEXT_PROMPT_TEMPLATE.format(text=text.strip())
