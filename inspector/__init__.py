"""Inspector API: paginated listing service with request/response body inspection."""
