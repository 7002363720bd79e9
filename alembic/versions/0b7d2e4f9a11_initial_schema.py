"""initial_schema

Revision ID: 0b7d2e4f9a11
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0b7d2e4f9a11'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: create every table."""
    op.create_table('users',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=True),
    sa.Column('password_hash', sa.String(length=255), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('companies',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('website', sa.String(length=500), nullable=True),
    sa.Column('linkedin_url', sa.String(length=500), nullable=True),
    sa.Column('industry', sa.String(length=255), nullable=False),
    sa.Column('last_funding_round', sa.String(length=100), nullable=True),
    sa.Column('last_funding_amount', sa.Float(), nullable=True),
    sa.Column('last_funding_date', sa.DateTime(), nullable=True),
    sa.Column('total_funding', sa.Float(), nullable=True),
    sa.Column('gtm_gap_detected', sa.Boolean(), nullable=False),
    sa.Column('executive_turnover', sa.Boolean(), nullable=False),
    sa.Column('pressure_score', sa.Integer(), nullable=False),
    sa.Column('analysis_notes', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_companies_user_id'), 'companies', ['user_id'], unique=False)
    op.create_index(op.f('ix_companies_last_funding_date'), 'companies', ['last_funding_date'], unique=False)
    op.create_index(op.f('ix_companies_pressure_score'), 'companies', ['pressure_score'], unique=False)

    op.create_table('opportunities',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(length=500), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('regulation_type', sa.String(length=255), nullable=False),
    sa.Column('regulation_reference', sa.String(length=255), nullable=True),
    sa.Column('implementation_date', sa.DateTime(), nullable=True),
    sa.Column('deadline_date', sa.DateTime(), nullable=True),
    sa.Column('legislative_stage', sa.String(length=100), nullable=True),
    sa.Column('last_legislative_update', sa.DateTime(), nullable=True),
    sa.Column('target_industries', sa.JSON(), nullable=False),
    sa.Column('affected_countries', sa.JSON(), nullable=False),
    sa.Column('estimated_market_size', sa.Float(), nullable=True),
    sa.Column('compliance_requirements', sa.Text(), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('priority', sa.String(length=10), nullable=False),
    sa.Column('revenue_potential', sa.String(length=20), nullable=True),
    sa.Column('market_gap', sa.String(length=20), nullable=True),
    sa.Column('competition_level', sa.String(length=20), nullable=True),
    sa.Column('lead_time_months', sa.Integer(), nullable=True),
    sa.Column('opportunity_score', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_opportunities_user_id'), 'opportunities', ['user_id'], unique=False)
    op.create_index(op.f('ix_opportunities_status'), 'opportunities', ['status'], unique=False)
    op.create_index(op.f('ix_opportunities_priority'), 'opportunities', ['priority'], unique=False)
    op.create_index(op.f('ix_opportunities_opportunity_score'), 'opportunities', ['opportunity_score'], unique=False)
    op.create_index(op.f('ix_opportunities_created_at'), 'opportunities', ['created_at'], unique=False)
    op.create_index('idx_opportunity_user_created', 'opportunities', ['user_id', 'created_at'], unique=False)

    op.create_table('executives',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('company_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('linkedin_url', sa.String(length=500), nullable=True),
    sa.Column('email', sa.String(length=255), nullable=True),
    sa.Column('risk_factors', sa.JSON(), nullable=False),
    sa.Column('desperation_signals', sa.JSON(), nullable=False),
    sa.Column('last_linkedin_post', sa.DateTime(), nullable=True),
    sa.Column('vulnerability_score', sa.Integer(), nullable=False),
    sa.Column('previous_vulnerability_score', sa.Integer(), nullable=True),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('opportunity_type', sa.String(length=255), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_executives_user_id'), 'executives', ['user_id'], unique=False)
    op.create_index(op.f('ix_executives_company_id'), 'executives', ['company_id'], unique=False)
    op.create_index(op.f('ix_executives_vulnerability_score'), 'executives', ['vulnerability_score'], unique=False)
    op.create_index(op.f('ix_executives_updated_at'), 'executives', ['updated_at'], unique=False)

    op.create_table('procurements',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(length=500), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('procurement_number', sa.String(length=100), nullable=True),
    sa.Column('region', sa.String(length=100), nullable=False),
    sa.Column('issuing_authority', sa.String(length=255), nullable=False),
    sa.Column('publish_date', sa.DateTime(), nullable=False),
    sa.Column('submission_deadline', sa.DateTime(), nullable=True),
    sa.Column('estimated_value', sa.Float(), nullable=True),
    sa.Column('currency', sa.String(length=10), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('service_gap', sa.Boolean(), nullable=False),
    sa.Column('bottleneck', sa.Boolean(), nullable=False),
    sa.Column('gap_analysis', sa.Text(), nullable=True),
    sa.Column('proposal_draft', sa.Text(), nullable=True),
    sa.Column('win_probability', sa.Integer(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_procurements_user_id'), 'procurements', ['user_id'], unique=False)
    op.create_index(op.f('ix_procurements_region'), 'procurements', ['region'], unique=False)
    op.create_index(op.f('ix_procurements_submission_deadline'), 'procurements', ['submission_deadline'], unique=False)
    op.create_index(op.f('ix_procurements_status'), 'procurements', ['status'], unique=False)

    op.create_table('government_contacts',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('opportunity_id', sa.Integer(), nullable=True),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('department', sa.String(length=255), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=True),
    sa.Column('phone', sa.String(length=50), nullable=True),
    sa.Column('linkedin_url', sa.String(length=500), nullable=True),
    sa.Column('role', sa.String(length=255), nullable=False),
    sa.Column('influence', sa.String(length=30), nullable=False),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_government_contacts_user_id'), 'government_contacts', ['user_id'], unique=False)
    op.create_index(op.f('ix_government_contacts_opportunity_id'), 'government_contacts', ['opportunity_id'], unique=False)
    op.create_index(op.f('ix_government_contacts_department'), 'government_contacts', ['department'], unique=False)
    op.create_index(op.f('ix_government_contacts_influence'), 'government_contacts', ['influence'], unique=False)

    op.create_table('procurement_contacts',
    sa.Column('procurement_id', sa.Integer(), nullable=False),
    sa.Column('contact_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['procurement_id'], ['procurements.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['contact_id'], ['government_contacts.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('procurement_id', 'contact_id')
    )

    op.create_table('competitor_activities',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('opportunity_id', sa.Integer(), nullable=False),
    sa.Column('competitor_name', sa.String(length=255), nullable=False),
    sa.Column('activity_type', sa.String(length=100), nullable=False),
    sa.Column('activity_date', sa.DateTime(), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('source_url', sa.String(length=500), nullable=True),
    sa.Column('threat_level', sa.String(length=20), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_competitor_activities_opportunity_id'), 'competitor_activities', ['opportunity_id'], unique=False)
    op.create_index(op.f('ix_competitor_activities_competitor_name'), 'competitor_activities', ['competitor_name'], unique=False)
    op.create_index(op.f('ix_competitor_activities_activity_date'), 'competitor_activities', ['activity_date'], unique=False)
    op.create_index(op.f('ix_competitor_activities_threat_level'), 'competitor_activities', ['threat_level'], unique=False)

    op.create_table('opportunity_notes',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('opportunity_id', sa.Integer(), nullable=False),
    sa.Column('content', sa.Text(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_opportunity_notes_opportunity_id'), 'opportunity_notes', ['opportunity_id'], unique=False)

    op.create_table('documents',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('opportunity_id', sa.Integer(), nullable=True),
    sa.Column('procurement_id', sa.Integer(), nullable=True),
    sa.Column('title', sa.String(length=500), nullable=False),
    sa.Column('doc_type', sa.String(length=50), nullable=True),
    sa.Column('url', sa.String(length=1000), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['procurement_id'], ['procurements.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_documents_opportunity_id'), 'documents', ['opportunity_id'], unique=False)
    op.create_index(op.f('ix_documents_procurement_id'), 'documents', ['procurement_id'], unique=False)

    op.create_table('research_tasks',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('opportunity_id', sa.Integer(), nullable=True),
    sa.Column('title', sa.String(length=500), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('priority', sa.String(length=10), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('due_date', sa.DateTime(), nullable=True),
    sa.Column('completed_at', sa.DateTime(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_research_tasks_user_id'), 'research_tasks', ['user_id'], unique=False)
    op.create_index(op.f('ix_research_tasks_opportunity_id'), 'research_tasks', ['opportunity_id'], unique=False)
    op.create_index(op.f('ix_research_tasks_status'), 'research_tasks', ['status'], unique=False)

    op.create_table('alerts',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('alert_type', sa.String(length=50), nullable=False),
    sa.Column('severity', sa.String(length=20), nullable=False),
    sa.Column('title', sa.String(length=500), nullable=False),
    sa.Column('message', sa.Text(), nullable=False),
    sa.Column('is_read', sa.Boolean(), nullable=False),
    sa.Column('action_required', sa.Boolean(), nullable=False),
    sa.Column('action_url', sa.String(length=500), nullable=True),
    sa.Column('company_id', sa.Integer(), nullable=True),
    sa.Column('opportunity_id', sa.Integer(), nullable=True),
    sa.Column('executive_id', sa.Integer(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['opportunity_id'], ['opportunities.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['executive_id'], ['executives.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_alerts_user_id'), 'alerts', ['user_id'], unique=False)
    op.create_index(op.f('ix_alerts_alert_type'), 'alerts', ['alert_type'], unique=False)
    op.create_index(op.f('ix_alerts_severity'), 'alerts', ['severity'], unique=False)
    op.create_index(op.f('ix_alerts_is_read'), 'alerts', ['is_read'], unique=False)
    op.create_index(op.f('ix_alerts_company_id'), 'alerts', ['company_id'], unique=False)
    op.create_index(op.f('ix_alerts_opportunity_id'), 'alerts', ['opportunity_id'], unique=False)
    op.create_index(op.f('ix_alerts_executive_id'), 'alerts', ['executive_id'], unique=False)
    op.create_index(op.f('ix_alerts_created_at'), 'alerts', ['created_at'], unique=False)
    op.create_index('idx_alert_user_read_created', 'alerts', ['user_id', 'is_read', 'created_at'], unique=False)

    op.create_table('reports',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('report_type', sa.String(length=50), nullable=False),
    sa.Column('report_date', sa.Date(), nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('content', sa.JSON(), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('user_id', 'report_type', 'report_date', name='uq_report_user_type_date')
    )
    op.create_index(op.f('ix_reports_user_id'), 'reports', ['user_id'], unique=False)
    op.create_index(op.f('ix_reports_report_date'), 'reports', ['report_date'], unique=False)


def downgrade() -> None:
    """Downgrade schema: drop every table."""
    op.drop_table('reports')
    op.drop_table('alerts')
    op.drop_table('research_tasks')
    op.drop_table('documents')
    op.drop_table('opportunity_notes')
    op.drop_table('competitor_activities')
    op.drop_table('procurement_contacts')
    op.drop_table('government_contacts')
    op.drop_table('procurements')
    op.drop_table('executives')
    op.drop_table('opportunities')
    op.drop_table('companies')
    op.drop_table('users')
