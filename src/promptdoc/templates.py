"""Built-in document templates."""

from typing import Any

SYSTEM_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Web Application",
        "description": "Browser application with an API backend",
        "content": {
            "sections": {
                "context": "Web Application Development",
                "objective": "Create a web application that provides excellent user experience",
                "technical_requirements": "JavaScript/TypeScript with Node.js backend, React frontend",
                "examples": "Similar to popular web apps with authentication, real-time features",
                "constraints": "Must load in under 2 seconds, handle 100 concurrent users",
                "output_format": "Complete working web application with deployment instructions",
            },
            "metadata": {"completeness": 30, "qualityScore": 70},
        },
    },
    {
        "name": "Command-Line Tool",
        "description": "CLI that automates common development tasks",
        "content": {
            "sections": {
                "context": "Command-Line Tool Development",
                "objective": "Create a CLI tool that automates common development tasks",
                "technical_requirements": "Python 3.9+ or Go 1.19+, minimal external dependencies",
                "examples": "Similar to tools like grep, sed, awk but for modern development",
                "constraints": "Process files up to 100MB within 30 seconds, max 128MB RAM",
                "output_format": "Single binary executable with help documentation",
            },
            "metadata": {"completeness": 30, "qualityScore": 70},
        },
    },
    {
        "name": "REST API",
        "description": "Backend REST service with documentation",
        "content": {
            "sections": {
                "context": "REST API Development",
                "objective": "Create a REST API that serves as backend for applications",
                "technical_requirements": "Node.js with TypeScript or Python with FastAPI",
                "examples": "RESTful API with CRUD operations, authentication, documentation",
                "constraints": "Sub-100ms response times, auto-scaling capability",
                "output_format": "Deployable API with OpenAPI documentation",
            },
            "metadata": {"completeness": 30, "qualityScore": 70},
        },
    },
]
