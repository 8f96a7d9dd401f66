"""Provider family settings.

Each family names the adapter kind that serves it and the environment
variable its credential is read from. A family whose variable is unset is
left out of the provider pool, and every model of that family is skipped
during failover.
"""

PROVIDER_SETTINGS = {
    "groq": {
        "adapter": "openai_compat",
        "api_key_env": "GROQ_API_KEY",
        "api_base": "https://api.groq.com/openai/v1",
        "timeout": 120.0,
        "generation": {
            "temperature": 0.2,
            "max_completion_tokens": 4096,
        },
    },
    "google": {
        "adapter": "google",
        "api_key_env": "GEMINI_API_KEY",
        "api_base": "https://generativelanguage.googleapis.com/v1beta",
        "timeout": 120.0,
        "generation": {
            "temperature": 0.2,
        },
    },
}
