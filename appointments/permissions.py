from rest_framework.permissions import BasePermission


class IsAdminOrBookingRequest(BasePermission):
    """
    Anyone may book (POST); every other method on the collection is for admin users.
    """
    def has_permission(self, request, view):
        if request.method == 'POST':
            return True
        return bool(request.user and request.user.is_staff)
