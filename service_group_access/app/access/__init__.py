"""
Access package.

Resolves which access a user holds from the directory groups it is member
of: super user access, or view/admin access per site. Resolution reads the
group settings of the registry and never fails; unknown or malformed
principals simply hold no access.
"""
