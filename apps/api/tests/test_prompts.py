from intake.prompts import (
    PROMPT_INTERVIEW_BASE,
    PROMPT_LIFE_STORY_SUFFIX,
    build_system_prompt,
    fill_summary_request,
)


def test_base_prompt_only():
    assert build_system_prompt(False, []) == PROMPT_INTERVIEW_BASE


def test_base_prompt_describes_the_block_format():
    assert "```resume-json" in PROMPT_INTERVIEW_BASE
    assert '"company": string' in PROMPT_INTERVIEW_BASE
    assert "{{" not in PROMPT_INTERVIEW_BASE


def test_life_story_suffix_is_appended():
    prompt = build_system_prompt(True)
    assert prompt.startswith(PROMPT_INTERVIEW_BASE)
    assert prompt.endswith(PROMPT_LIFE_STORY_SUFFIX)


def test_missing_labels_are_joined_in_order():
    prompt = build_system_prompt(False, ["work experience", "projects"])
    assert "still missing: work experience, projects." in prompt
    assert "{{MISSING}}" not in prompt
    assert PROMPT_LIFE_STORY_SUFFIX not in prompt


def test_suffixes_follow_base_then_life_story_then_missing():
    prompt = build_system_prompt(True, ["projects"])
    life_story_at = prompt.index(PROMPT_LIFE_STORY_SUFFIX)
    missing_at = prompt.index("still missing: projects")
    assert 0 < life_story_at < missing_at


def test_summary_request_lists_gaps_or_none():
    assert "Current gaps: projects; work experience." in fill_summary_request("user: hi", ["projects", "work experience"])
    assert "Current gaps: None." in fill_summary_request("user: hi", [])
    assert "user: hi" in fill_summary_request("user: hi", [])
