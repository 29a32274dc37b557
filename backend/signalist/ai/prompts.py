"""Prompt templates for the welcome email and the daily news digest."""

PERSONALIZED_WELCOME_EMAIL_PROMPT = """Generate highly personalized HTML content that will be inserted into an email template at the {{intro}} placeholder.

User profile data:
{{userProfile}}

PERSONALIZATION REQUIREMENTS:
- Reference the user's investment goals, risk tolerance and preferred industry directly.
- Keep it to two or three sentences, warm and direct, without repeating the greeting.
- Show how Signalist (watchlists, alerts, daily news summaries) helps with their specific goals.

FORMATTING REQUIREMENTS:
- Return clean HTML only: a single <p class="mobile-text" style="margin: 0 0 30px 0; font-size: 16px; line-height: 1.6; color: #CCDADC;"> paragraph.
- Wrap key personalized details in <strong> tags.
- No markdown, no code fences, no headings.
"""

NEWS_SUMMARY_EMAIL_PROMPT = """Generate HTML content for a market news summary email that will be inserted into the NEWS_SUMMARY_EMAIL_TEMPLATE at the {{newsContent}} placeholder.

News data to summarize:
{{newsData}}

Write the summary in the language used in the country with code {{countryCode}}.

REQUIREMENTS:
- Group articles into sections using <h3 class="mobile-news-title dark-text" style="margin: 30px 0 15px 0; font-size: 18px; font-weight: 600; color: #f8f9fa; line-height: 1.2;"> headings.
- For each article write a short headline and two or three plain-English bullet points using <ul> and <li> tags.
- End each article with a "Read Full Story" link pointing at its url.
- Return clean HTML only. No markdown, no code fences.
"""

DEFAULT_WELCOME_INTRO = (
    "Thanks for joining Signalist. You now have the tools to track markets and make smarter moves."
)

DEFAULT_NEWS_CONTENT = "No market news."


def build_user_profile(
    country: str | None,
    investment_goals: str | None,
    risk_tolerance: str | None,
    preferred_industry: str | None,
) -> str:
    return (
        f"- Country: {country or 'Unknown'}\n"
        f"- Investment goals: {investment_goals or 'Unknown'}\n"
        f"- Risk tolerance: {risk_tolerance or 'Unknown'}\n"
        f"- Preferred industry: {preferred_industry or 'Unknown'}\n"
    )


def welcome_prompt(user_profile: str) -> str:
    return PERSONALIZED_WELCOME_EMAIL_PROMPT.replace("{{userProfile}}", user_profile)


def news_summary_prompt(news_data: str, country_code: str) -> str:
    return NEWS_SUMMARY_EMAIL_PROMPT.replace("{{newsData}}", news_data).replace(
        "{{countryCode}}", country_code
    )
