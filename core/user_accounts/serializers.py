from rest_framework import serializers
from .models import CustomUser


class CurrentUserSerializer(serializers.ModelSerializer):
    """Read serializer for the authenticated user, including the linked employee"""
    role_display = serializers.CharField(source='get_role_display', read_only=True)
    employee_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'phone_number', 'role', 'role_display', 'employee_id']
        read_only_fields = fields
