"""GraphQL documents for the branch lifecycle operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Operation:
    """A named GraphQL document."""

    name: str
    document: str
    idempotent: bool = True  # safe for the transport to retry


GET_BRANCHES = Operation(
    name="GetBranches",
    document="""
query GetBranches($owner: String!, $repo: String!, $prefix: String!, $first: Int!, $after: String) {
  repository(owner: $owner, name: $repo) {
    refs(refPrefix: $prefix, first: $first, after: $after) {
      nodes {
        id
        name
        prefix
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
""",
)

GET_BRANCH_PROTECTION_RULES = Operation(
    name="GetBranchProtectionRules",
    document="""
query GetBranchProtectionRules($owner: String!, $repo: String!, $first: Int!, $after: String) {
  repository(owner: $owner, name: $repo) {
    branchProtectionRules(first: $first, after: $after) {
      nodes {
        id
        pattern
        allowsDeletions
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
""",
)

GET_BRANCH_PROTECTION_RULE = Operation(
    name="GetBranchProtectionRule",
    document="""
query GetBranchProtectionRule($id: ID!) {
  node(id: $id) {
    __typename
    ... on BranchProtectionRule {
      id
      pattern
      allowsDeletions
    }
  }
}
""",
)

UPDATE_BRANCH_PROTECTION_RULE = Operation(
    name="UpdateBranchProtectionRule",
    document="""
mutation UpdateBranchProtectionRule($input: UpdateBranchProtectionRuleInput!) {
  updateBranchProtectionRule(input: $input) {
    branchProtectionRule {
      id
      allowsDeletions
    }
  }
}
""",
)

DELETE_REF = Operation(
    name="DeleteRef",
    document="""
mutation DeleteRef($input: DeleteRefInput!) {
  deleteRef(input: $input) {
    clientMutationId
  }
}
""",
    idempotent=False,
)
