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

USERS_COLLECTION = "users"
PROJECTS_COLLECTION = "projects"

MAX_BIO_LENGTH = 240
MAX_QUERY_LENGTH = 1000
MAX_PROJECT_DESCRIPTION_LENGTH = 4000
MAX_SKILLS_TEXT_LENGTH = 1000
MAX_RESOURCE_NAME_LENGTH = 300
MAX_README_LENGTH = 30000

POINTS_PER_MERGED_PR = 5
NO_SKILLS_INFERRED = "no-skills-inferred"
