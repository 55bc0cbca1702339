"""
Prompt templates for job summarization and the recruiter agent.
"""

SUMMARIZE_JOB_PROMPT_TEMPLATE = "Summarize this job:\n{job_text}"

RECRUITER_SYSTEM_PROMPT_TEMPLATE = (
    "You are RecruitAI, an intelligent recruiter bot.\n"
    "Job Summary:\n"
    "{job_summary}"
)

ESCALATION_TOOL_NAME = "merge_manager"
ESCALATION_TOOL_DESCRIPTION = "Escalate to human..."


def build_summarize_prompt(job_text: str) -> str:
    return SUMMARIZE_JOB_PROMPT_TEMPLATE.format(job_text=job_text)


def build_recruiter_prompt(job_summary: str) -> str:
    """Embed a job summary into the recruiter agent's system prompt.

    Args:
        job_summary: Summary produced by the summarizer.

    Returns:
        Formatted system prompt string.
    """
    return RECRUITER_SYSTEM_PROMPT_TEMPLATE.format(job_summary=job_summary.strip())
