"""Application constants.

Contains storage key conventions, id generation parameters, and the field
groups the access predicates hand out to each kind of actor.
"""

# ---------------------------------------------------------------------------
# Identifiers & storage keys
# ---------------------------------------------------------------------------
ID_SUFFIX_LENGTH: int = 9
ID_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"
KV_KEY_PREFIX: str = "@jobtracker/"

# Fields no caller may ever write directly (managed by the adapters)
MANAGED_FIELDS: frozenset[str] = frozenset({"id", "created_at", "updated_at"})

# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------
# Fields the owning candidate may edit after creation
APPLICATION_EDITABLE_FIELDS: frozenset[str] = frozenset({
    "title", "company", "location", "job_url", "contract_type",
    "application_date", "status", "notes", "documents",
})

# Shared access: the attached recruiter may only move the status
RECRUITER_APPLICATION_FIELDS: frozenset[str] = frozenset({"status"})

# Default contract type when applying from a posting
CONTRACT_TYPE_FOR_JOB_TYPE: dict[str, str] = {
    "full-time": "permanent",
    "part-time": "permanent",
    "contract": "fixed_term",
    "internship": "internship",
    "freelance": "freelance",
    "temporary": "temporary",
}

# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------
JOB_EDITABLE_FIELDS: frozenset[str] = frozenset({
    "title", "company", "location", "type", "description", "salary",
    "job_url", "posted_date", "source", "remote", "requirements", "archived",
})

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
COMMON_PROFILE_FIELDS: frozenset[str] = frozenset({
    "name", "email", "phone", "address",
})
CANDIDATE_PROFILE_FIELDS: frozenset[str] = frozenset({
    "skills", "experience", "education", "linkedin_url",
})
RECRUITER_PROFILE_FIELDS: frozenset[str] = frozenset({
    "company_name", "company_sector", "company_website", "company_size",
})
