"""
GrantFit Celery Tasks

Task Modules:
    - matching: company-to-grant match recomputation

Usage:
    from backend.tasks.matching import recompute_company_matches, recompute_grant_matches

    # After a profile save (do not wait for the result)
    recompute_company_matches.delay(str(company_id))

    # After a grant's eligibility rules change
    recompute_grant_matches.delay(str(grant_id))
"""
