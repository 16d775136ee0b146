"""Prompt builders for the LLM item service."""

import json

from item_mcp.core.constants import LLM_SEARCH_ITEM_COUNT, PAGE_CONTENT_CHAR_LIMIT
from item_mcp.models import ItemInfo, WebsiteConfig


def _category_line(category: str | None) -> str:
    return f"Category: {category}" if category else ""


def build_search_prompt(query: str, category: str | None, current_date: str) -> str:
    """Prompt asking for detailed, currently available items."""
    return f"""Research the following keyword in depth and provide {LLM_SEARCH_ITEM_COUNT} items \
of information that are available as of today ({current_date}).

Keyword: {query}
{_category_line(category)}

For every item provide:
- name: official name
- organization: providing organization (a concrete name)
- description: detailed summary of about 300 characters
- eligibility: who qualifies, with concrete requirements and limits
- amount: amounts, quantities or scale, with figures or how they are computed
- deadline: exact dates or the next scheduled date
- applicationProcess: how to apply or use it (documents, offices, online steps)
- requirementDetails: detailed requirements and evaluation criteria
- exclusions: concrete conditions that exclude applicants
- url: official reference URL, as specific as possible
- category: a fitting category
- contactInfo: phone numbers, e-mail addresses or contact pages

Be specific and practical for eligibility and requirement details.
Only include deadlines on or after {current_date}."""


def build_web_items_prompt(query: str, category: str | None) -> str:
    """Prompt asking for items found on real websites, with official URLs."""
    return f"""Find information related to the following keyword on the web.

Keyword: {query}
{_category_line(category)}

Collect 3-5 items from real websites. For every item provide name, organization,
description (about 200 characters), eligibility, amount, deadline,
applicationProcess, url and category.
Always include the official website URL."""


def build_page_extraction_prompt(
    title: str,
    content: str,
    website: WebsiteConfig,
    url: str,
) -> str:
    """Prompt asking to structure the main item described by a web page."""
    return f"""Extract the main item of information from the following web page and
structure it. When a field is not available, write "Not available".

Website: {website.name} ({website.url})
Page title: {title}
Page URL: {url}

Page content (first {PAGE_CONTENT_CHAR_LIMIT} characters):
{content[:PAGE_CONTENT_CHAR_LIMIT]}

Fill name, organization, description (about 300 characters), eligibility, amount,
deadline, applicationProcess, url ("{url}") and category.
If the page holds no substantial item, set found to false and leave item empty."""


def build_summary_prompt(
    title: str,
    items: list[ItemInfo],
    include_intro: bool,
    include_conclusion: bool,
    current_date: str,
) -> str:
    """Prompt asking for a markdown article summarizing saved items."""
    items_json = json.dumps(
        [item.to_json_dict() for item in items],
        ensure_ascii=False,
        indent=2,
    )
    requirements = []
    if include_intro:
        requirements.append(
            "- Start with an introduction explaining the overview, importance and "
            "current state of these items.",
        )
    requirements.extend(
        [
            "- Organize every item so it is easy to read.",
            "- Give each item its own heading and describe details as bullet points.",
            "- Emphasize important information such as procedures and deadlines.",
            "- Use headings (##, ###) to build a clear hierarchy.",
            "- Insert URLs as clickable links.",
            '- When an item has a source, state it as "Source: [Source Name]".',
        ],
    )
    if include_conclusion:
        requirements.append(
            "- End with a conclusion giving cautions and next steps for readers.",
        )
    requirements_text = "\n".join(requirements)

    return f"""Using the information below, write an easy-to-read markdown article
presenting the latest information as of {current_date}.

{items_json}

Title: {title}

Requirements:
{requirements_text}

Answer in markdown only and do not use HTML tags.
Finish with: "*This information is current as of {current_date}. Please check each official site for the latest details.*\""""
