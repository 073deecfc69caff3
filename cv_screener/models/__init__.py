# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import profile, keyword_list, submission, cv_result

# Explicit class exports for cleaner imports
from .profile import Profile
from .keyword_list import KeywordList
from .submission import Submission, SubmissionStatus
from .cv_result import CvResult, EducationDetail, ExperienceDetail, SkillDetail

__all__ = [
    "Profile",
    "KeywordList",
    "Submission",
    "SubmissionStatus",
    "CvResult",
    "EducationDetail",
    "ExperienceDetail",
    "SkillDetail",
]
