# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

# Prompt templates for the AI flows. Filled with str.format, so literal braces
# must be doubled.

SUGGEST_RESOURCES_PROMPT = """You are an expert in recommending learning resources for students.

You will use the student's interests to suggest relevant learning resources.

Interests: {interests}

Suggest a list of learning resources that would be helpful for the student, listing only the name of the suggested resource."""

SUGGEST_PROJECTS_PROMPT = """You are an expert career advisor for software developers. Your goal is to recommend inspiring and practical portfolio projects.

Based on the user's skills, generate a list of 3 to 5 project ideas.

For each project, provide:
1. A catchy title.
2. A detailed description (1-2 paragraphs) of the project and its features.
3. A step-by-step roadmap of milestones to complete the project.

User's skills: {skills}
"""

INFER_PROJECT_DETAILS_PROMPT = """You are an expert at analyzing software projects to understand their purpose and technical requirements.

Based on the following information from a GitHub repository, please perform two tasks:
1. Generate a concise, one or two-sentence summary of the project's purpose. This will be displayed on a project card.
2. Infer a list of key technical skills (like programming languages, frameworks, libraries, and tools) required to contribute to this project.

Repository Information:
- Primary Language: {language}
- Topics: {topics}

README Content:
---
{readme_content}
---
"""

RECOMMEND_MENTORS_PROMPT = """You are an expert at matching students with technical mentors. Your goal is to rank a list of available mentors based on a user's query.

Analyze the user's query and compare it against each mentor's profile, skills, and bio.

Return a list of the mentors' unique IDs (UIDs), ranked in order from the best match to the worst. Do not exclude any mentors; return all of them in ranked order.

User Query:
---
{query}
---

Available Mentors:
---
{mentors_json}
---
"""

RECOMMEND_TEAM_MEMBERS_PROMPT = """You are an expert at building software development teams. Your goal is to rank a list of available users to form a team for a given project description.

Analyze the project description and compare it against each user's profile, skills, and bio.

Return a list of the users' unique IDs (UIDs), ranked in order from the best match to the worst. Do not exclude any users; return all of them in ranked order.

Project Description:
---
{project_description}
---

Available Users:
---
{users_json}
---
"""
