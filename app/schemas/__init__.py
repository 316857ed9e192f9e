from .ResumeSchemas import (
	PersonalInfo,
	Experience,
	Education,
	ResumeContent,
	Profile,
	Resume,
	ResumeCreate,
	ResumeUpdate,
)
from .JobSchemas import ScrapeFailure, UrlValidationResult, JobScrapingResult
from .template import ResumeTemplate, TemplateCustomizations, AtsValidation

__all__ = [
	"PersonalInfo",
	"Experience",
	"Education",
	"ResumeContent",
	"Profile",
	"Resume",
	"ResumeCreate",
	"ResumeUpdate",
	"ScrapeFailure",
	"UrlValidationResult",
	"JobScrapingResult",
	"ResumeTemplate",
	"TemplateCustomizations",
	"AtsValidation",
]
