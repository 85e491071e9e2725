import unittest
from unittest.mock import patch

import requests
from fastapi.testclient import TestClient
from firebase_admin import auth as firebase_auth

from backend.app import create_app
from backend.auth import get_current_user
from backend.config import Settings, get_settings
from backend.db import InMemoryDbClient
from backend.dependencies import get_db_client
from flows.mentors import RecommendMentorsOutput
from flows.project_details import InferProjectDetailsOutput
from flows.project_ideas import ProjectIdea, SuggestProjectsOutput
from flows.resources import SuggestResourcesOutput
from flows.team import RecommendTeamMembersOutput
from import_pipeline.fetch_utils import GithubApiError
from import_pipeline.import_pipeline import ProjectImportError
from models.gemini import GeminiInvalidResponseException
from shared.types import (
    AuthUser,
    ContributionSummary,
    JoinedProject,
    Project,
    UserProfile,
)

TEST_USER = AuthUser(
    uid="user-1",
    display_name="Ada Lovelace",
    email="ada@example.com",
    photo_url="https://example.com/ada.png",
)


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.settings = Settings(use_in_memory_backends=True, _env_file=None)
        app = create_app()
        app.dependency_overrides[get_db_client] = lambda: self.db
        app.dependency_overrides[get_settings] = lambda: self.settings
        app.dependency_overrides[get_current_user] = lambda: TEST_USER
        self.app = app
        self.client = TestClient(app)

    def _add_profile(self, uid, **kwargs):
        self.db.create_user(UserProfile(uid=uid, **kwargs))

    def _add_project(self, author="someone", repo_full_name="someone/repo"):
        return self.db.add_project(
            Project(
                title="repo",
                description="A repo.",
                skills=["Python"],
                author=author,
                avatar="https://example.com/a.png",
                repo_full_name=repo_full_name,
                gh_id=42,
            )
        )

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_missing_bearer_token_is_rejected(self):
        del self.app.dependency_overrides[get_current_user]
        response = self.client.get("/api/profiles/me")
        self.assertEqual(response.status_code, 401)

    @patch("backend.auth.get_firebase_app")
    @patch("backend.auth.auth.verify_id_token")
    def test_verified_token_claims_become_the_user(self, mock_verify, _mock_app):
        del self.app.dependency_overrides[get_current_user]
        mock_verify.return_value = {
            "uid": "firebase-uid",
            "name": "Grace Hopper",
            "email": "grace@example.com",
            "picture": "https://example.com/grace.png",
        }
        response = self.client.post(
            "/api/auth/sign-in",
            json={"github_username": "grace"},
            headers={"Authorization": "Bearer good-token"},
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["uid"], "firebase-uid")
        self.assertEqual(payload["display_name"], "Grace Hopper")
        self.assertEqual(payload["email"], "grace@example.com")
        self.assertEqual(payload["photo_url"], "https://example.com/grace.png")
        self.assertEqual(mock_verify.call_args.args[0], "good-token")

    @patch("backend.auth.get_firebase_app")
    @patch("backend.auth.auth.verify_id_token")
    def test_rejected_token_is_unauthorized(self, mock_verify, _mock_app):
        del self.app.dependency_overrides[get_current_user]
        mock_verify.side_effect = firebase_auth.InvalidIdTokenError("bad token")
        response = self.client.get(
            "/api/profiles/me", headers={"Authorization": "Bearer bad-token"}
        )
        self.assertEqual(response.status_code, 401)

    @patch("backend.auth.auth.verify_id_token")
    def test_non_bearer_scheme_is_unauthorized(self, mock_verify):
        del self.app.dependency_overrides[get_current_user]
        response = self.client.get(
            "/api/profiles/me", headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )
        self.assertEqual(response.status_code, 401)
        mock_verify.assert_not_called()

    def test_sign_in_creates_profile_then_merges_identity(self):
        response = self.client.post(
            "/api/auth/sign-in", json={"github_username": "ada"}
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["uid"], "user-1")
        self.assertEqual(payload["github_username"], "ada")
        self.assertEqual(payload["bio"], "Hi, I'm Ada Lovelace. I'm new here!")
        self.assertEqual(payload["points"], 0)
        self.assertEqual(payload["joined_projects"], [])

        self.db.update_user("user-1", {"bio": "Edited bio", "points": 15})
        response = self.client.post(
            "/api/auth/sign-in", json={"github_username": "ada-l"}
        )
        payload = response.json()
        self.assertEqual(payload["github_username"], "ada-l")
        self.assertEqual(payload["bio"], "Edited bio")
        self.assertEqual(payload["points"], 15)

    def test_get_my_profile_not_found(self):
        response = self.client.get("/api/profiles/me")
        self.assertEqual(response.status_code, 404)

    def test_update_profile_parses_skills(self):
        self._add_profile("user-1", github_username="ada")
        response = self.client.patch(
            "/api/profiles/me",
            json={
                "bio": "I like engines.",
                "skills": "Python,  Rust , ,Go",
                "linkedin_url": "https://linkedin.com/in/ada",
                "twitter_url": "",
            },
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["skills"], ["Python", "Rust", "Go"])
        self.assertEqual(payload["linkedin_url"], "https://linkedin.com/in/ada")
        self.assertEqual(payload["twitter_url"], "")
        self.assertEqual(self.db.get_user("user-1").bio, "I like engines.")

    def test_partial_update_keeps_other_fields(self):
        self._add_profile(
            "user-1",
            bio="keep me",
            skills=["Go"],
            linkedin_url="https://linkedin.com/in/ada",
        )
        response = self.client.patch(
            "/api/profiles/me", json={"twitter_url": "https://twitter.com/ada"}
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["bio"], "keep me")
        self.assertEqual(payload["skills"], ["Go"])
        self.assertEqual(payload["linkedin_url"], "https://linkedin.com/in/ada")
        self.assertEqual(payload["twitter_url"], "https://twitter.com/ada")

    def test_update_profile_rejects_long_bio_and_bad_url(self):
        self._add_profile("user-1")
        response = self.client.patch("/api/profiles/me", json={"bio": "x" * 241})
        self.assertEqual(response.status_code, 422)

        response = self.client.patch(
            "/api/profiles/me", json={"linkedin_url": "not a url"}
        )
        self.assertEqual(response.status_code, 422)

    def test_list_and_get_profiles(self):
        self._add_profile("a", display_name="A")
        self._add_profile("b", display_name="B")
        response = self.client.get("/api/profiles")
        self.assertEqual(response.status_code, 200)
        uids = {p["uid"] for p in response.json()["profiles"]}
        self.assertEqual(uids, {"a", "b"})

        self.assertEqual(self.client.get("/api/profiles/b").json()["display_name"], "B")
        self.assertEqual(self.client.get("/api/profiles/zzz").status_code, 404)

    def test_toggle_saved_resource(self):
        self._add_profile("user-1")
        response = self.client.post(
            "/api/profiles/me/saved-resources", json={"resource": "Fluent Python"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["saved"])
        self.assertEqual(response.json()["saved_resources"], ["Fluent Python"])

        response = self.client.post(
            "/api/profiles/me/saved-resources", json={"resource": "Fluent Python"}
        )
        self.assertFalse(response.json()["saved"])
        self.assertEqual(response.json()["saved_resources"], [])

    @patch("backend.routes.profiles.sync_contributions")
    def test_sync_contributions(self, mock_sync):
        mock_sync.return_value = ContributionSummary(
            merged_pull_requests=3, points=15
        )
        response = self.client.post("/api/profiles/me/sync-contributions")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(), {"merged_pull_requests": 3, "points": 15}
        )

    @patch("import_pipeline.fetch_utils.requests.get")
    def test_sync_contributions_survives_github_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        self._add_profile(
            "user-1",
            github_username="ada",
            points=20,
            joined_projects=[
                JoinedProject(project_id="p1", repo_full_name="grace/compiler")
            ],
        )
        response = self.client.post("/api/profiles/me/sync-contributions")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"merged_pull_requests": 0, "points": 0})

    def test_sync_contributions_without_github_username(self):
        self._add_profile("user-1")
        response = self.client.post("/api/profiles/me/sync-contributions")
        self.assertEqual(response.status_code, 400)

    @patch("backend.routes.import_pipeline.import_github_project")
    def test_add_project(self, mock_import):
        self._add_profile("user-1", github_username="ada")
        mock_import.return_value = Project(
            title="engine",
            description="An analytical engine.",
            skills=["Python"],
            author="ada",
            avatar="https://example.com/ada.png",
            repo_full_name="ada/engine",
            gh_id=7,
        )
        response = self.client.post(
            "/api/projects", json={"github_url": "https://github.com/ada/engine"}
        )
        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertEqual(payload["repo_full_name"], "ada/engine")
        self.assertTrue(payload["id"])
        self.assertIsNotNone(payload["created_at"])
        self.assertEqual(mock_import.call_args.args[1], "ada")

        listed = self.client.get("/api/projects").json()["projects"]
        self.assertEqual([p["id"] for p in listed], [payload["id"]])

    @patch("backend.routes.import_pipeline.import_github_project")
    def test_add_project_maps_errors(self, mock_import):
        mock_import.side_effect = ProjectImportError(
            "Only public repositories can be added."
        )
        response = self.client.post(
            "/api/projects", json={"github_url": "https://github.com/ada/engine"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["detail"], "Only public repositories can be added."
        )

        mock_import.side_effect = GithubApiError("missing", status_code=404)
        response = self.client.post(
            "/api/projects", json={"github_url": "https://github.com/ada/engine"}
        )
        self.assertEqual(response.status_code, 404)

        mock_import.side_effect = GeminiInvalidResponseException()
        response = self.client.post(
            "/api/projects", json={"github_url": "https://github.com/ada/engine"}
        )
        self.assertEqual(response.status_code, 502)

    @patch("import_pipeline.fetch_utils.requests.get")
    def test_add_project_github_unreachable(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("connection refused")
        self._add_profile("user-1", github_username="ada")
        response = self.client.post(
            "/api/projects", json={"github_url": "https://github.com/ada/engine"}
        )
        self.assertEqual(response.status_code, 502)
        self.assertEqual(self.db.list_projects(), [])

    def test_list_projects_newest_first(self):
        first = self._add_project(repo_full_name="someone/first")
        second = self._add_project(repo_full_name="someone/second")
        listed = self.client.get("/api/projects").json()["projects"]
        self.assertEqual([p["id"] for p in listed], [second.id, first.id])

    def test_join_project(self):
        self._add_profile("user-1", github_username="ada")
        project = self._add_project()
        response = self.client.post(f"/api/projects/{project.id}/join")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["joined_projects"],
            [{"project_id": project.id, "repo_full_name": "someone/repo"}],
        )

        # Joining again does not duplicate the entry.
        response = self.client.post(f"/api/projects/{project.id}/join")
        self.assertEqual(len(response.json()["joined_projects"]), 1)

    def test_join_own_project_is_forbidden(self):
        self._add_profile("user-1", github_username="Ada")
        project = self._add_project(author="ada")
        response = self.client.post(f"/api/projects/{project.id}/join")
        self.assertEqual(response.status_code, 403)

    def test_join_missing_project(self):
        self._add_profile("user-1")
        response = self.client.post("/api/projects/nope/join")
        self.assertEqual(response.status_code, 404)

    @patch("backend.routes.mentors.recommend_mentors")
    def test_mentor_search_ranks_profiles(self, mock_recommend):
        self._add_profile("a", skills=["Python"])
        self._add_profile("b", skills=["Firebase"])
        self._add_profile("c", skills=["Go"])
        mock_recommend.return_value = RecommendMentorsOutput(
            ranked_mentors=["b", "ghost", "a"]
        )
        response = self.client.post(
            "/api/mentors/search", json={"query": "Firebase mentor"}
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["ranked"])
        self.assertEqual([p["uid"] for p in payload["profiles"]], ["b", "a"])

        request = mock_recommend.call_args.args[0]
        self.assertEqual(request.query, "Firebase mentor")
        self.assertEqual({m.uid for m in request.mentors}, {"a", "b", "c"})

    @patch("backend.routes.mentors.recommend_mentors")
    def test_blank_mentor_search_skips_model(self, mock_recommend):
        self._add_profile("a")
        response = self.client.post("/api/mentors/search", json={"query": "  "})
        payload = response.json()
        self.assertFalse(payload["ranked"])
        self.assertEqual([p["uid"] for p in payload["profiles"]], ["a"])
        mock_recommend.assert_not_called()

    @patch("backend.routes.team.recommend_team_members")
    def test_team_search(self, mock_recommend):
        self._add_profile("a")
        self._add_profile("b")
        mock_recommend.return_value = RecommendTeamMembersOutput(
            ranked_users=["a", "b"]
        )
        response = self.client.post(
            "/api/team/search",
            json={"project_description": "A water tracking app"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [p["uid"] for p in response.json()["profiles"]], ["a", "b"]
        )

    @patch("backend.routes.project_ideas.suggest_projects")
    def test_suggest_projects(self, mock_suggest):
        mock_suggest.return_value = SuggestProjectsOutput(
            projects=[
                ProjectIdea(
                    title="Habit Tracker",
                    description="Track habits.",
                    roadmap=["Design schema", "Build UI"],
                )
            ]
        )
        response = self.client.post(
            "/api/ai/suggest-projects", json={"skills": "React, TypeScript"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["projects"][0]["title"], "Habit Tracker")

        response = self.client.post("/api/ai/suggest-projects", json={"skills": " "})
        self.assertEqual(response.status_code, 400)

    @patch("backend.routes.resources.suggest_resources")
    def test_suggest_resources_adds_search_links(self, mock_suggest):
        mock_suggest.return_value = SuggestResourcesOutput(
            resources=["Fluent Python", "CS50"]
        )
        response = self.client.post(
            "/api/ai/suggest-resources", json={"interests": "Python"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["resources"][0],
            {
                "name": "Fluent Python",
                "search_url": "https://www.google.com/search?q=Fluent+Python",
            },
        )

    @patch("backend.routes.project_details.infer_project_details")
    def test_infer_project_details(self, mock_infer):
        mock_infer.return_value = InferProjectDetailsOutput(
            skills=["Go"], description="A CLI."
        )
        response = self.client.post(
            "/api/ai/infer-project-details",
            json={"readme_content": "# cli", "topics": ["cli"], "language": "Go"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"skills": ["Go"], "description": "A CLI."})


if __name__ == "__main__":
    unittest.main()
