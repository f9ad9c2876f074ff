"""
URL configuration for team endpoints below /api/team/.

The team resource itself is routed at /api/team in the project urls.
"""

from django.urls import path

from api.team import views

app_name = "team"

urlpatterns = [
    path("create", views.CreateTeamView.as_view(), name="create-team"),
    path("invite", views.InvitationsView.as_view(), name="team-invitations"),
    path("invite/accept", views.AcceptInvitationView.as_view(), name="accept-invitation"),
    path("members", views.MembersView.as_view(), name="team-members"),
    path("activity", views.ActivityView.as_view(), name="team-activity"),
]
