"""GraphQL documents for the parts of the review model REST does not expose."""

THREAD_PAGE_SIZE = 100

REVIEW_THREADS_QUERY = """
query GetReviewThreads($owner: String!, $repo: String!, $number: Int!, $first: Int!, $after: String) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $number) {
      reviewThreads(first: $first, after: $after) {
        pageInfo {
          hasNextPage
          endCursor
        }
        nodes {
          id
          isResolved
          comments(first: 100) {
            nodes {
              databaseId
            }
          }
        }
      }
    }
  }
}
"""

RESOLVE_THREAD_MUTATION = """
mutation ResolveReviewThread($threadId: ID!) {
  resolveReviewThread(input: {threadId: $threadId}) {
    thread {
      id
      isResolved
    }
  }
}
"""

UNRESOLVE_THREAD_MUTATION = """
mutation UnresolveReviewThread($threadId: ID!) {
  unresolveReviewThread(input: {threadId: $threadId}) {
    thread {
      id
      isResolved
    }
  }
}
"""

MINIMIZE_COMMENT_MUTATION = """
mutation MinimizeComment($subjectId: ID!, $classifier: ReportedContentClassifiers!) {
  minimizeComment(input: {subjectId: $subjectId, classifier: $classifier}) {
    minimizedComment {
      isMinimized
      minimizedReason
    }
  }
}
"""

UNMINIMIZE_COMMENT_MUTATION = """
mutation UnminimizeComment($subjectId: ID!) {
  unminimizeComment(input: {subjectId: $subjectId}) {
    unminimizedComment {
      isMinimized
    }
  }
}
"""
