"""
Tuning constants for FTC disclosure checks.

The values are kept exactly as the checks were first calibrated; change them
here rather than inline.
"""

# Disclosure must start within the first 75% of the content
PLACEMENT_THRESHOLD = 0.75

# Matched disclosure shorter than this is flagged as vague ("#ad" is 3)
MIN_DISCLOSURE_CHARS = 10

# Scripts longer than this need an explicit [DISCLOSURE] marker
VIDEO_MARKER_WORD_LIMIT = 50

# Spoken disclosures need at least this many words
MIN_SPOKEN_DISCLOSURE_WORDS = 5

# Social captions must surface the disclosure within these lines
SOCIAL_VISIBLE_LINES = 3

DISCLOSURE_MARKER = "[DISCLOSURE]"

# Issue messages
ISSUE_MISSING = "Missing FTC disclosure statement"
ISSUE_MISSING_RELATIONSHIP = "Content must include affiliate relationship disclosure"
ISSUE_TOO_LATE = "Disclosure appears too late in content (should be prominent and early)"
ISSUE_TOO_VAGUE = "Disclosure may be too vague or unclear"
ISSUE_NO_MARKER = "Video script missing [DISCLOSURE] section marker"
ISSUE_SPOKEN_TOO_SHORT = "Spoken disclosure should be at least 5 words for clarity"
ISSUE_NO_HASHTAG = "Social media posts should include #ad or #affiliate hashtag"
ISSUE_NOT_VISIBLE = "Disclosure should appear in the first 3 lines for visibility"
