from rest_framework import permissions


class IsDormAdmin(permissions.BasePermission):
    """
    Permission: User must be a dormitory administrator.
    """

    message = 'Only administrators can perform this action.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_dorm_admin)


class IsRoomMember(permissions.BasePermission):
    """
    Permission: User must be enrolled in the room (administrators always pass).
    """

    message = 'You must be a member of this room.'

    def has_object_permission(self, request, view, obj):
        # obj is a Room instance
        if request.user.is_dorm_admin:
            return True
        return obj.members.filter(user=request.user).exists()
