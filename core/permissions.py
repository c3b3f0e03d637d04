from models.enums import Permission as P, Role


# Everything a signed-in member can do; every other role starts from this.
MEMBER_PERMISSIONS = frozenset({
    P.view_dashboard,
    P.view_profile,
    P.view_announcements,
    P.register_events,
})


# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
ROLE_PERMISSIONS = {

    # =====================================================
    # SUPER ADMIN — Full access to everything
    # =====================================================
    Role.super_admin: frozenset(P),

    # =====================================================
    # CHAIRMAN — executive committee head
    # =====================================================
    Role.chairman: MEMBER_PERMISSIONS | {
        P.manage_users, P.approve_registrations, P.manage_roles,
        P.manage_events, P.manage_communities, P.manage_projects,
        P.manage_payments, P.manage_financial_records, P.audit_financial_records,
        P.post_announcements, P.manage_content, P.manage_elections,
        P.view_analytics,
    },

    # =====================================================
    # VICE CHAIRMAN — no payments, no role assignment
    # =====================================================
    Role.vice_chairman: MEMBER_PERMISSIONS | {
        P.manage_users, P.approve_registrations,
        P.manage_events, P.manage_communities, P.manage_projects,
        P.audit_financial_records,
        P.post_announcements, P.manage_content,
        P.view_analytics,
    },

    # =====================================================
    # GENERAL ADMIN
    # =====================================================
    Role.general_admin: MEMBER_PERMISSIONS | {
        P.manage_users, P.approve_registrations, P.manage_roles,
        P.manage_events, P.manage_communities, P.manage_projects,
        P.post_announcements, P.manage_content, P.manage_certificates,
        P.manage_elections,
        P.view_analytics,
    },

    # =====================================================
    # ADMIN — legacy alias of general_admin
    # =====================================================
    Role.admin: MEMBER_PERMISSIONS | {
        P.manage_users, P.approve_registrations, P.manage_roles,
        P.manage_events, P.manage_communities, P.manage_projects,
        P.post_announcements, P.manage_content, P.manage_certificates,
        P.manage_elections,
        P.view_analytics,
    },

    # =====================================================
    # COMMUNITY ADMIN
    # =====================================================
    Role.community_admin: MEMBER_PERMISSIONS | {
        P.manage_communities, P.create_community_events,
        P.manage_projects, P.post_announcements,
    },

    # =====================================================
    # EVENTS ADMIN
    # =====================================================
    Role.events_admin: MEMBER_PERMISSIONS | {
        P.manage_events, P.create_community_events, P.post_announcements,
    },

    # =====================================================
    # PROJECTS ADMIN
    # =====================================================
    Role.projects_admin: MEMBER_PERMISSIONS | {
        P.manage_projects,
    },

    # =====================================================
    # FINANCE ADMIN — M-PESA payments and records
    # =====================================================
    Role.finance_admin: MEMBER_PERMISSIONS | {
        P.manage_payments, P.manage_financial_records,
        P.audit_financial_records, P.view_analytics,
    },

    # =====================================================
    # CONTENT ADMIN — blogs, announcements, certificates
    # =====================================================
    Role.content_admin: MEMBER_PERMISSIONS | {
        P.manage_content, P.post_announcements, P.manage_certificates,
    },

    # =====================================================
    # TECHNICAL ADMIN
    # =====================================================
    Role.technical_admin: MEMBER_PERMISSIONS | {
        P.manage_system_settings, P.view_analytics,
    },

    # =====================================================
    # MARKETING ADMIN
    # =====================================================
    Role.marketing_admin: MEMBER_PERMISSIONS | {
        P.manage_marketing, P.post_announcements, P.view_analytics,
    },

    # =====================================================
    # MEMBER — default for principals without role rows
    # =====================================================
    Role.member: MEMBER_PERMISSIONS,
}
