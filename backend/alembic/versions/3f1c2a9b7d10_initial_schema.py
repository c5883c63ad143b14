"""Initial schema: users, profiles, projects, applications, completions, config, logs

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLE = sa.Enum('STUDENT', 'COORDINATOR', 'ORGANIZATION', 'ADMINISTRATOR', name='userrole')
ORGANIZATION_TYPE = sa.Enum(
    'NGO', 'SMALL_BUSINESS', 'STARTUP', 'NON_PROFIT', 'SOCIAL_ENTERPRISE', 'OTHER', name='organizationtype'
)
PROJECT_STATUS = sa.Enum(
    'DRAFT', 'PENDING_REVIEW', 'COORDINATOR_ASSIGNED', 'PUBLISHED', 'IN_PROGRESS', 'COMPLETED', 'ARCHIVED',
    name='projectstatus',
)
PROJECT_CATEGORY = sa.Enum(
    'DIGITALIZATION', 'COMMUNICATION', 'RESEARCH', 'COMMUNITY_SERVICES', 'MARKETING', 'DESIGN',
    'SOFTWARE_DEVELOPMENT', 'DATA_ANALYSIS', 'EVENT_MANAGEMENT', 'OTHER',
    name='projectcategory',
)
APPLICATION_STATUS = sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', 'WITHDRAWN', name='applicationstatus')
PERFORMANCE_RATING = sa.Enum(
    'EXCELLENT', 'VERY_GOOD', 'GOOD', 'SATISFACTORY', 'NEEDS_IMPROVEMENT', name='performancerating'
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # Accounts
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('email_verified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('profile_picture_url', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('is_suspended', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'], unique=False)

    # Role profiles, one per user
    op.create_table(
        'students',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('study_program', sa.String(), nullable=True),
        sa.Column('year_of_study', sa.Integer(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('interests', sa.JSON(), nullable=False),
        sa.Column('resume_url', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_students_user_id'), 'students', ['user_id'], unique=True)
    op.create_index(op.f('ix_students_study_program'), 'students', ['study_program'], unique=False)

    op.create_table(
        'coordinators',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('areas_of_expertise', sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_coordinators_user_id'), 'coordinators', ['user_id'], unique=True)
    op.create_index(op.f('ix_coordinators_department'), 'coordinators', ['department'], unique=False)

    op.create_table(
        'organizations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('type', ORGANIZATION_TYPE, nullable=False),
        sa.Column('contact_person', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('contact_phone', sa.String(), nullable=True),
        sa.Column('website_url', sa.String(), nullable=True),
        sa.Column('facebook_url', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_organizations_user_id'), 'organizations', ['user_id'], unique=True)
    op.create_index(op.f('ix_organizations_type'), 'organizations', ['type'], unique=False)
    op.create_index(op.f('ix_organizations_is_verified'), 'organizations', ['is_verified'], unique=False)

    op.create_table(
        'administrators',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_administrators_user_id'), 'administrators', ['user_id'], unique=True)

    # Projects and their lifecycle
    op.create_table(
        'projects',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', PROJECT_CATEGORY, nullable=False),
        sa.Column('required_skills', sa.JSON(), nullable=False),
        sa.Column('estimated_hours_per_week', sa.Integer(), nullable=True),
        sa.Column('estimated_duration_weeks', sa.Integer(), nullable=True),
        sa.Column('number_of_students', sa.Integer(), nullable=False),
        sa.Column('status', PROJECT_STATUS, nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('organization_id', sa.String(length=36), nullable=False),
        sa.Column('coordinator_id', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['coordinator_id'], ['coordinators.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_projects_category'), 'projects', ['category'], unique=False)
    op.create_index(op.f('ix_projects_status'), 'projects', ['status'], unique=False)
    op.create_index(op.f('ix_projects_organization_id'), 'projects', ['organization_id'], unique=False)
    op.create_index(op.f('ix_projects_coordinator_id'), 'projects', ['coordinator_id'], unique=False)
    op.create_index(op.f('ix_projects_created_at'), 'projects', ['created_at'], unique=False)

    op.create_table(
        'applications',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('student_id', sa.String(length=36), nullable=False),
        sa.Column('project_id', sa.String(length=36), nullable=False),
        sa.Column('motivation_statement', sa.Text(), nullable=False),
        sa.Column('status', APPLICATION_STATUS, nullable=False),
        sa.Column('reviewed_by', sa.String(length=36), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'project_id', name='uq_application_student_project'),
    )
    op.create_index(op.f('ix_applications_student_id'), 'applications', ['student_id'], unique=False)
    op.create_index(op.f('ix_applications_project_id'), 'applications', ['project_id'], unique=False)
    op.create_index(op.f('ix_applications_status'), 'applications', ['status'], unique=False)
    op.create_index(op.f('ix_applications_created_at'), 'applications', ['created_at'], unique=False)

    op.create_table(
        'project_completions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('project_id', sa.String(length=36), nullable=False),
        sa.Column('student_id', sa.String(length=36), nullable=False),
        sa.Column('role_description', sa.Text(), nullable=False),
        sa.Column('key_achievements', sa.JSON(), nullable=False),
        sa.Column('skills_developed', sa.JSON(), nullable=False),
        sa.Column('actual_hours_worked', sa.Integer(), nullable=True),
        sa.Column('actual_duration_weeks', sa.Integer(), nullable=True),
        sa.Column('organization_performance_rating', PERFORMANCE_RATING, nullable=False),
        sa.Column('organization_written_evaluation', sa.Text(), nullable=False),
        sa.Column('is_visible_in_portfolio', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('project_id', 'student_id', name='uq_completion_project_student'),
    )
    op.create_index(op.f('ix_project_completions_project_id'), 'project_completions', ['project_id'], unique=False)
    op.create_index(op.f('ix_project_completions_student_id'), 'project_completions', ['student_id'], unique=False)
    op.create_index(op.f('ix_project_completions_completed_at'), 'project_completions', ['completed_at'], unique=False)

    # Platform settings, a single row
    op.create_table(
        'config',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('logo', sa.String(), nullable=False),
        sa.Column('theme_colors', sa.JSON(), nullable=False),
        sa.Column('smtp_host', sa.String(), nullable=False),
        sa.Column('smtp_port', sa.Integer(), nullable=False),
        sa.Column('smtp_user', sa.String(), nullable=False),
        sa.Column('smtp_password', sa.String(), nullable=False),
        sa.Column('email_from', sa.String(), nullable=False),
        sa.Column('allow_public_registration', sa.Boolean(), nullable=False),
        sa.Column('student_email_domain', sa.String(), nullable=True),
        sa.Column('staff_email_domain', sa.String(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # Audit trail
    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('resource', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_logs_id'), 'logs', ['id'], unique=False)
    op.create_index(op.f('ix_logs_ts'), 'logs', ['ts'], unique=False)
    op.create_index(op.f('ix_logs_user_id'), 'logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_logs_action'), 'logs', ['action'], unique=False)
    op.create_index(op.f('ix_logs_resource'), 'logs', ['resource'], unique=False)
    op.create_index(op.f('ix_logs_status'), 'logs', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    # Drop in reverse dependency order
    op.drop_table('logs')
    op.drop_table('config')
    op.drop_table('project_completions')
    op.drop_table('applications')
    op.drop_table('projects')
    op.drop_table('administrators')
    op.drop_table('organizations')
    op.drop_table('coordinators')
    op.drop_table('students')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (PERFORMANCE_RATING, APPLICATION_STATUS, PROJECT_CATEGORY, PROJECT_STATUS, ORGANIZATION_TYPE, USER_ROLE):
        enum_type.drop(bind, checkfirst=True)
